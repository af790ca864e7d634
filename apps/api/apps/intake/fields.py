"""
Typed intake field schema.

Templates keep their fields as a JSON blob at rest. Every read goes
through `parse_fields`, which decodes the blob into `Field` values, and
every answer payload goes through `validate_answers` before it is stored.

Field kinds:
- text, textarea, select: string answers (select limited to `options`
  when the template lists any)
- number: int or float (booleans are not numbers here)
- checkbox: boolean; a required checkbox must be ticked
"""
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, List, Optional, Tuple

from django.db import models

from apps.core.exceptions import InvalidInput


class FieldType(models.TextChoices):
    TEXT = 'text', 'Text'
    TEXTAREA = 'textarea', 'Textarea'
    NUMBER = 'number', 'Number'
    SELECT = 'select', 'Select'
    CHECKBOX = 'checkbox', 'Checkbox'


_STRING_TYPES = {FieldType.TEXT, FieldType.TEXTAREA, FieldType.SELECT}

REQUIRED_MESSAGE = 'This field is required'


@dataclass(frozen=True)
class Field:
    id: str
    label: str
    type: str
    required: bool = False
    placeholder: Optional[str] = None
    options: Tuple[str, ...] = dataclass_field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'label': self.label,
            'type': self.type,
            'required': self.required,
        }
        if self.placeholder is not None:
            data['placeholder'] = self.placeholder
        if self.options:
            data['options'] = list(self.options)
        return data

    def check(self, value) -> Optional[str]:
        """Reason the value is unacceptable for this field, or None."""
        if _is_empty(value):
            return REQUIRED_MESSAGE if self.required else None

        if self.type in _STRING_TYPES:
            if not isinstance(value, str):
                return 'Expected a string'
            if self.type == FieldType.SELECT and self.options and value not in self.options:
                return f'Must be one of: {", ".join(self.options)}'
            return None

        if self.type == FieldType.NUMBER:
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                return 'Expected a number'
            return None

        if self.type == FieldType.CHECKBOX:
            if not isinstance(value, bool):
                return 'Expected true or false'
            return None

        return f'Unsupported field type: {self.type}'


def _is_empty(value) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _parse_field(raw, index) -> Field:
    prefix = f'fields[{index}]'
    if not isinstance(raw, dict):
        raise InvalidInput('Each field must be an object', field=prefix)

    field_id = raw.get('id')
    label = raw.get('label')
    field_type = raw.get('type')
    required = raw.get('required', False)
    placeholder = raw.get('placeholder')
    options = raw.get('options')

    if not isinstance(field_id, str) or not field_id.strip():
        raise InvalidInput('Field id is required', field=f'{prefix}.id')
    if not isinstance(label, str) or not label.strip():
        raise InvalidInput('Field label is required', field=f'{prefix}.label')
    if field_type not in FieldType.values:
        raise InvalidInput(
            f'Invalid field type. Options: {", ".join(FieldType.values)}',
            field=f'{prefix}.type'
        )
    if not isinstance(required, bool):
        raise InvalidInput('required must be true or false', field=f'{prefix}.required')
    if placeholder is not None and not isinstance(placeholder, str):
        raise InvalidInput('placeholder must be a string', field=f'{prefix}.placeholder')
    if options is not None:
        if not isinstance(options, list) or not all(isinstance(o, str) for o in options):
            raise InvalidInput('options must be a list of strings', field=f'{prefix}.options')

    return Field(
        id=field_id,
        label=label,
        type=field_type,
        required=required,
        placeholder=placeholder,
        options=tuple(options or ()),
    )


def parse_fields(raw) -> List[Field]:
    """
    Decode a stored or submitted field list.

    Raises:
        InvalidInput: not a non-empty list, malformed entry, duplicate id
    """
    if not isinstance(raw, list) or not raw:
        raise InvalidInput('At least one field is required', field='fields')

    fields = []
    seen = set()
    for index, item in enumerate(raw):
        parsed = _parse_field(item, index)
        if parsed.id in seen:
            raise InvalidInput(f'Duplicate field id: {parsed.id}', field=f'fields[{index}].id')
        seen.add(parsed.id)
        fields.append(parsed)
    return fields


def validate_answers(fields: List[Field], answers: Dict[str, Any]) -> Dict[str, str]:
    """
    Check answers against the schema.

    Returns {field_id: reason} for every offending field; empty when valid.
    Keys that match no field are ignored.
    """
    errors = {}
    for schema_field in fields:
        reason = schema_field.check(answers.get(schema_field.id))
        if reason:
            errors[schema_field.id] = reason
    return errors
