from .catalog import ColumnDescriptor, SchemaIntrospector

__all__ = ["ColumnDescriptor", "SchemaIntrospector"]
