"""View helper: rename model properties to the table columns they are stored in.

Listings of orders and addresses are rendered against column names, while
the models expose property names. The persistence settings describe, per
model class, the table it maps to and which column carries which property.
"""

from collections.abc import Mapping

from protean.exceptions import IncorrectUsageError
from protean.utils.reflection import declared_fields


def gettable_properties(data) -> dict:
    """Return the readable properties of ``data`` as a dict."""
    if isinstance(data, Mapping):
        return dict(data)

    try:
        fields = declared_fields(data)
    except IncorrectUsageError:
        fields = None
    if fields:
        return {name: getattr(data, name, None) for name in fields}

    return {
        name: value
        for name, value in vars(data).items()
        if not name.startswith("_") and not callable(value)
    }


def map_model_properties_to_table_columns(data, class_name: str, table: str, persistence):
    """Rename the properties of ``data`` to the column names of ``table``.

    ``data`` is returned unchanged if ``class_name`` has no mapping or maps
    to another table. Properties without a column keep their name.
    """
    class_settings = persistence.classes.get(class_name)
    if class_settings is None or class_settings.mapping is None:
        return data

    mapping = class_settings.mapping
    if mapping.table_name != table:
        return data

    property_to_column = {column.map_on_property: name for name, column in mapping.columns.items()}

    return {
        property_to_column.get(name, name): value
        for name, value in gettable_properties(data).items()
    }
