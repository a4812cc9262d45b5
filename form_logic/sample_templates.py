"""
Sample form templates - maintenance inspection checklist
Used as seed data for demos and as the reference template in tests
"""

from .builders import (
    create_condition, create_rule, when_field_equals, when_field_greater_than,
    when_field_is_not_empty, when_field_less_than,
)
from .enums import Action, FieldType, Operator

HVAC_INSPECTION_TEMPLATE = {
    'name': 'HVAC Inspection',
    'description': 'Routine inspection of rooftop HVAC units and their electrical supply',
    'category': 'inspection',
    'version': '1.0',
    'fields': [
        {
            'key': 'unit_status',
            'label': 'Unit Status',
            'field_type': FieldType.SELECT.value,
            'required': True,
            'section': 'General',
            'order': 1,
            'options': [
                {'label': 'Operational', 'value': 'operational'},
                {'label': 'Degraded', 'value': 'degraded'},
                {'label': 'Down', 'value': 'down'},
            ],
        },
        {
            'key': 'fault_description',
            'label': 'Fault Description',
            'description': 'Describe the observed fault',
            'field_type': FieldType.TEXT.value,
            'section': 'General',
            'order': 2,
            'validation': {'minLength': 5, 'maxLength': 500},
        },
        {
            'key': 'supply_temp',
            'label': 'Supply Air Temperature',
            'field_type': FieldType.NUMBER.value,
            'required': True,
            'section': 'Readings',
            'order': 3,
            'validation': {'min': -40, 'max': 80},
        },
        {
            'key': 'overheat_photo',
            'label': 'Overheat Evidence Photo',
            'field_type': FieldType.PHOTO.value,
            'section': 'Readings',
            'order': 4,
        },
        {
            'key': 'refrigerant_check',
            'label': 'Refrigerant Level Check',
            'field_type': FieldType.RADIO.value,
            'section': 'Readings',
            'order': 5,
        },
        {
            'key': 'technician_notes',
            'label': 'Technician Notes',
            'field_type': FieldType.TEXT.value,
            'section': 'Summary',
            'order': 6,
        },
        {
            'key': 'supervisor_signature',
            'label': 'Supervisor Signature',
            'field_type': FieldType.SIGNATURE.value,
            'section': 'Summary',
            'order': 7,
            'conditional': create_rule('unit_status', Operator.EQUALS, 'down'),
        },
        {
            'key': 'asset_tag',
            'label': 'Asset Tag',
            'field_type': FieldType.TEXT.value,
            'readonly': True,
            'section': 'General',
            'order': 0,
            'validation': {'pattern': r'^HV-\d{4}$', 'message': 'Asset tags look like HV-0000'},
        },
    ],
    'conditions': [
        when_field_equals('unit_status', 'down', 'fault_description'),
        when_field_equals('unit_status', 'degraded', 'fault_description'),
        create_condition('fault_description', Action.REQUIRE, [
            create_rule('unit_status', Operator.EQUALS, 'down'),
        ]),
        when_field_greater_than('supply_temp', 30, 'overheat_photo'),
        create_condition('overheat_photo', Action.REQUIRE, [
            create_rule('supply_temp', Operator.GREATER_THAN, 30),
        ]),
        when_field_less_than('supply_temp', 12, 'refrigerant_check'),
        create_condition('supply_temp', Action.DISABLE, [
            create_rule('unit_status', Operator.EQUALS, 'down'),
        ]),
        when_field_is_not_empty('fault_description', 'technician_notes'),
    ],
}
