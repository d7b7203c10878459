"""
Class label mapping for classification targets.

Known categories are coded 1..k in the order given; code 0 is reserved
for the fallback category. A label that matches no known category is
mapped to the fallback instead of failing the load (unless the map is
strict), and every such label is counted and logged.
"""

from typing import Dict, Iterable, List, Optional

from loguru import logger

from .exceptions import UnrecognizedLabelError

FALLBACK_CODE = 0
DEFAULT_FALLBACK_NAME = 'other'


def _as_number(text: str) -> Optional[float]:
    try:
        return float(text)
    except ValueError:
        return None


class LabelMap:
    """
    Map symbolic or numeric labels to integer class codes.

    Example:
        >>> labels = LabelMap(['CYT', 'NUC', 'MIT'])
        >>> labels.encode('NUC')
        2
        >>> labels.encode('ERL')
        0
        >>> labels.name(0)
        'other'
    """

    def __init__(self, categories: Iterable[str],
                 fallback_name: str = DEFAULT_FALLBACK_NAME,
                 strict: bool = False):
        """
        Args:
            categories: Known labels, coded 1..k in this order
            fallback_name: Name reported for code 0
            strict: If True, unknown labels raise UnrecognizedLabelError
        """
        self.categories: List[str] = [str(c).strip() for c in categories]
        if not self.categories:
            raise ValueError("LabelMap needs at least one known category")
        if len(set(self.categories)) != len(self.categories):
            raise ValueError(f"Duplicate categories: {self.categories}")
        if fallback_name in self.categories:
            raise ValueError(f"Fallback name {fallback_name!r} is also a known category")

        self.fallback_name = fallback_name
        self.strict = strict
        self._codes: Dict[str, int] = {c: i + 1 for i, c in enumerate(self.categories)}
        self._numeric_codes: Dict[float, int] = {}
        for category, code in self._codes.items():
            value = _as_number(category)
            if value is not None:
                self._numeric_codes.setdefault(value, code)
        # The fallback name itself is a legitimate label (e.g. '0' for binary)
        self._codes[fallback_name] = FALLBACK_CODE
        fallback_value = _as_number(fallback_name)
        if fallback_value is not None:
            self._numeric_codes.setdefault(fallback_value, FALLBACK_CODE)
        self.unrecognized: Dict[str, int] = {}

    @classmethod
    def infer(cls, labels: Iterable[str], **kwargs) -> 'LabelMap':
        """Build a map whose categories are the sorted distinct labels."""
        fallback_name = kwargs.get('fallback_name', DEFAULT_FALLBACK_NAME)
        distinct = {str(label).strip() for label in labels} - {fallback_name}
        return cls(sorted(distinct), **kwargs)

    @classmethod
    def binary(cls, positive: str = '1', negative: str = '0', **kwargs) -> 'LabelMap':
        """Positive label coded 1, negative label (and anything unknown) coded 0."""
        return cls([positive], fallback_name=negative, **kwargs)

    @property
    def codes(self) -> List[int]:
        """Codes of the known categories (fallback excluded)."""
        return list(range(1, len(self.categories) + 1))

    @property
    def unrecognized_count(self) -> int:
        return sum(self.unrecognized.values())

    def encode(self, label: str) -> int:
        """Code for `label`; unknown labels get FALLBACK_CODE."""
        text = str(label).strip()
        code = self._codes.get(text)
        if code is None:
            value = _as_number(text)
            if value is not None:
                code = self._numeric_codes.get(value)
        if code is not None:
            return code

        if self.strict:
            raise UnrecognizedLabelError(
                f"Unrecognized label {text!r}; known: {self.categories}")
        if text not in self.unrecognized:
            logger.warning("Unrecognized label {!r} mapped to fallback category {!r}",
                           text, self.fallback_name)
        self.unrecognized[text] = self.unrecognized.get(text, 0) + 1
        return FALLBACK_CODE

    def name(self, code: int) -> str:
        """Category name for a code (the fallback name for 0)."""
        code = int(code)
        if code == FALLBACK_CODE:
            return self.fallback_name
        if not 1 <= code <= len(self.categories):
            raise ValueError(f"Unknown class code {code}")
        return self.categories[code - 1]

    def names(self) -> Dict[int, str]:
        """All codes, fallback first, mapped to their names."""
        names = {FALLBACK_CODE: self.fallback_name}
        names.update({code: self.name(code) for code in self.codes})
        return names

    def __len__(self) -> int:
        return len(self.categories)

    def __repr__(self) -> str:
        return (f"LabelMap(categories={self.categories}, "
                f"fallback_name={self.fallback_name!r}, strict={self.strict})")
