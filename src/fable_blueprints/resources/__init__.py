from .blueprint_resource import BlueprintResource

__all__ = ["BlueprintResource"]
