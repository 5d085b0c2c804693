"""
Mixins for common functionality.
"""

from __future__ import annotations

from typing import Any


class Configurable:
    """
    Mixin class for handling configuration overrides.

    Classes using this mixin can use apply_overrides to set attributes from an
    override dict, falling back to the uppercase attribute of a config object.
    """

    def apply_overrides(
        self,
        overrides: dict[str, Any],
        config_obj: Any,
        attr_list: list[str] | None = None,
    ) -> None:
        """
        Apply overrides to the instance using the config object as defaults.

        Sets self.attr = overrides[attr] when given (and not None), otherwise
        config_obj.ATTR, for each attr in attr_list.

        Args:
            overrides: Dictionary of override values
            config_obj: Configuration object with uppercase attribute names
            attr_list: List of attribute names to set
        """
        for attr in attr_list or []:
            value = overrides.get(attr)
            if value is None and hasattr(config_obj, attr.upper()):
                value = getattr(config_obj, attr.upper())
            setattr(self, attr, value)
