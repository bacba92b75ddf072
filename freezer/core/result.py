from dataclasses import dataclass, field


@dataclass
class ValidationResult:
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def first_error(self):
        return next(iter(self.errors.values()), None)

    def to_dict(self) -> dict:
        return {"isValid": self.is_valid, "errors": dict(self.errors)}
