"""Formularios web (Flask-WTF)."""

from __future__ import annotations

from flask_wtf import FlaskForm
from wtforms import PasswordField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Email, Length

from inventario.models.equipment import (
    FORM_STATUSES,
    TYPE_LABELS,
    Equipment,
    EquipmentDraft,
    EquipmentStatus,
    EquipmentType,
)

REQUIRED = "Este campo es obligatorio."


class EquipmentForm(FlaskForm):
    type = SelectField(
        "Tipo",
        choices=[(t.value, TYPE_LABELS[t]) for t in EquipmentType],
        default=EquipmentType.LAPTOP.value,
        validators=[DataRequired(REQUIRED)],
    )
    model = StringField(
        "Modelo con No Serial",
        validators=[DataRequired(REQUIRED), Length(max=255)],
        filters=[lambda v: v.strip() if isinstance(v, str) else v],
    )
    serial_number = StringField(
        "Placa",
        validators=[DataRequired(REQUIRED), Length(max=128)],
        filters=[lambda v: v.strip() if isinstance(v, str) else v],
    )
    status = SelectField(
        "Estado",
        choices=[(s.value, s.label) for s in FORM_STATUSES],
        default=EquipmentStatus.AVAILABLE.value,
        validators=[DataRequired(REQUIRED)],
    )
    imagenes = TextAreaField("Imágenes (una URL por línea)")

    def __init__(self, *args, record: Equipment | None = None, **kwargs) -> None:
        if record is not None and "data" not in kwargs:
            kwargs["data"] = {
                "type": record.type.value,
                "model": record.model,
                "serial_number": record.serial_number,
                "status": record.status.value,
                "imagenes": "\n".join(record.images),
            }
        super().__init__(*args, **kwargs)
        self.record = record
        if record is not None:
            # El navegador no envía selects deshabilitados; el tipo queda fijo.
            self.type.render_kw = {"disabled": True}
            self.type.data = record.type.value
            current = record.status
            if current not in FORM_STATUSES and current is not EquipmentStatus.UNKNOWN:
                self.status.choices = [(current.value, current.label)] + list(self.status.choices)

    @property
    def is_edit(self) -> bool:
        return self.record is not None

    def to_draft(self) -> EquipmentDraft:
        images = [line.strip() for line in (self.imagenes.data or "").splitlines() if line.strip()]
        draft = EquipmentDraft(
            type=EquipmentType(self.type.data),
            model=self.model.data,
            serial_number=self.serial_number.data,
            status=EquipmentStatus(self.status.data or EquipmentStatus.AVAILABLE.value),
            images=images,
        )
        if self.record is not None:
            return draft.with_type(self.record.type)
        return draft


class LoginForm(FlaskForm):
    email = StringField(
        "Correo",
        validators=[DataRequired(REQUIRED), Email("Correo inválido."), Length(max=255)],
        filters=[lambda v: v.strip().lower() if isinstance(v, str) else v],
    )
    password = PasswordField("Contraseña", validators=[DataRequired(REQUIRED)])
