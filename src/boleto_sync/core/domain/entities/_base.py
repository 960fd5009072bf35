from dataclasses import MISSING, asdict, fields, is_dataclass
from typing import Any, TypeVar

T = TypeVar("T")


class EntityMixin:
    @classmethod
    def from_dict(cls: type[T], data: dict[str, Any]) -> T:
        return cls(**data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_model(cls: type[T], model: Any, **overrides: Any) -> T:
        """
        Cria a entidade a partir de um modelo Django.
        Campos da dataclass ausentes no model ficam com o default,
        `overrides` tem precedência (ex.: nomes vindos de joins).
        """
        if not is_dataclass(cls):
            raise TypeError(f"{cls.__name__} deve ser um dataclass")
        data: dict[str, Any] = {}
        for f in fields(cls):
            if f.name in overrides:
                data[f.name] = overrides[f.name]
            elif hasattr(model, f.name):
                data[f.name] = getattr(model, f.name)
            elif f.default is MISSING and f.default_factory is MISSING:
                raise AttributeError(f"{type(model).__name__} não possui '{f.name}'")
        return cls(**data)
