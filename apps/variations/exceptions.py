"""
Errors raised by the variation matrix engine.

All of them are local validation failures on malformed input; none are
retryable. Each one carries the offending attribute id or combination key
so callers can render an actionable message.
"""

from typing import Any, Dict, Hashable, Iterable, Optional


class VariationMatrixError(Exception):
    """Base class for every engine error."""
    code = 'variation_matrix_error'

    def __init__(
        self,
        message: str,
        attribute_id: Optional[Hashable] = None,
        combination_key: Any = None
    ):
        super().__init__(message)
        self.message = message
        self.attribute_id = attribute_id
        self.combination_key = combination_key

    def as_dict(self) -> Dict[str, Any]:
        """Render the error for API responses."""
        data = {'detail': self.message, 'code': self.code}
        if self.attribute_id is not None:
            data['attribute_id'] = self.attribute_id
        if self.combination_key is not None:
            data['combination'] = [
                {'attribute_id': attr_id, 'attribute_value_id': value_id}
                for attr_id, value_id in self.combination_key
            ]
        return data


class DuplicateAttributeError(VariationMatrixError):
    code = 'duplicate_attribute'

    def __init__(self, attribute_id: Hashable, name: str = ''):
        label = name or attribute_id
        super().__init__(
            f"{label} is already attached to this product",
            attribute_id=attribute_id
        )


class UnknownValueError(VariationMatrixError):
    code = 'unknown_value'

    def __init__(self, attribute_id: Hashable, value_ids: Iterable[Hashable], name: str = ''):
        self.value_ids = list(value_ids)
        label = name or attribute_id
        values = ', '.join(str(v) for v in self.value_ids)
        super().__init__(
            f"{label} has no value(s) {values}",
            attribute_id=attribute_id
        )


class IncompleteAttributeError(VariationMatrixError):
    code = 'incomplete_attribute'

    def __init__(self, attribute_id: Hashable, name: str = ''):
        label = name or attribute_id
        super().__init__(
            f"{label} has no selected values",
            attribute_id=attribute_id
        )


class NoVariationAttributesError(VariationMatrixError):
    code = 'no_variation_attributes'

    def __init__(self):
        super().__init__("Add at least one attribute marked for variations")


class DuplicateCombinationError(VariationMatrixError):
    code = 'duplicate_combination'

    def __init__(self, combination_key: Any):
        super().__init__(
            f"A variation already exists for combination {combination_key}",
            combination_key=combination_key
        )


class NotFoundError(VariationMatrixError):
    code = 'not_found'

    def __init__(self, target: Any, kind: str = 'variation'):
        self.target = target
        attribute_id = target if kind == 'attribute' else None
        combination_key = target if kind == 'combination' else None
        super().__init__(
            f"No {kind} matches {target}",
            attribute_id=attribute_id,
            combination_key=combination_key
        )


class NotEditableFieldError(VariationMatrixError):
    code = 'not_editable'

    def __init__(self, fields: Iterable[str]):
        self.fields = sorted(fields)
        super().__init__(f"Fields cannot be edited: {', '.join(self.fields)}")


class InvalidStatusError(VariationMatrixError):
    code = 'invalid_status'

    def __init__(self, status: Any):
        self.status = status
        super().__init__(f"'{status}' is not a valid variation status")


class PersistenceError(VariationMatrixError):
    """A save payload references rows that do not belong to the product."""
    code = 'persistence_error'
