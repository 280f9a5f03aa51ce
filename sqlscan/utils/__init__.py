from sqlscan.utils import logging, module_loader, serializers, text, type_guards

__all__ = ("logging", "module_loader", "serializers", "text", "type_guards")
