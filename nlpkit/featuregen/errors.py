"""
Exceptions raised while assembling feature generators from a descriptor.

Hierarchy:

    GeneratorFactoryError
    ├── InvalidFormatError                 (descriptor content is wrong)
    │   ├── MalformedDescriptorError
    │   ├── UnsupportedDescriptorFormatError
    │   ├── MissingClassAttributeError
    │   ├── InvalidParameterTypeError
    │   ├── MissingParameterError
    │   ├── ParameterTypeMismatchError
    │   └── MissingResourceProviderError
    ├── UnknownGeneratorClassError
    ├── FactoryInstantiationError
    ├── ResourceNotFoundError
    └── AdaptiveDataClearError

Only InvalidFormatError and its subclasses are tolerated during serializer
discovery; everything else propagates to the caller.
"""


class GeneratorFactoryError(Exception):
    """Base class for all feature generator assembly errors."""


class InvalidFormatError(GeneratorFactoryError):
    """The descriptor, or a value inside it, does not have the expected form."""


class MalformedDescriptorError(InvalidFormatError):
    """The descriptor is not well-formed XML."""


class UnsupportedDescriptorFormatError(InvalidFormatError):
    """The descriptor root is not the one this entry point expects."""

    def __init__(self, root_tag: str, expected_tag: str):
        self.root_tag = root_tag
        self.expected_tag = expected_tag
        super().__init__(
            f"Descriptor root must be <{expected_tag}>, got <{root_tag}>"
        )


class MissingClassAttributeError(InvalidFormatError):
    """A generator element has no (or a blank) class attribute."""

    def __init__(self, tag: str = "generator"):
        self.tag = tag
        super().__init__(f"<{tag}> element must have a non-empty class attribute")


class InvalidParameterTypeError(InvalidFormatError):
    """A parameter element has an unknown tag or an unparsable value."""

    def __init__(self, tag: str, message: str, name: str | None = None):
        self.tag = tag
        self.name = name
        super().__init__(f"<{tag}> {message}")


class MissingParameterError(InvalidFormatError):
    """A required parameter was not declared in the descriptor."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"parameter {name} must be set!")


class ParameterTypeMismatchError(InvalidFormatError):
    """A parameter was declared with a different type than requested."""

    def __init__(self, name: str, expected: str, actual: str):
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(f"parameter {name} must be {expected}, but was declared as {actual}")


class MissingResourceProviderError(InvalidFormatError):
    """A generator needs a resource but no resource provider was supplied."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Resource '{key}' is required but no resource provider is available")


class UnknownGeneratorClassError(GeneratorFactoryError):
    """No factory is registered under the requested class name."""

    def __init__(self, class_name: str, available: list[str] | None = None):
        self.class_name = class_name
        message = f"Unknown feature generator factory '{class_name}'"
        if available is not None:
            message += f". Available factories: {', '.join(available) or '(none registered)'}"
        super().__init__(message)


class FactoryInstantiationError(GeneratorFactoryError):
    """A registered factory could not be constructed."""

    def __init__(self, class_name: str, cause: BaseException):
        self.class_name = class_name
        super().__init__(f"Failed to instantiate factory '{class_name}': {cause}")


class ResourceNotFoundError(GeneratorFactoryError):
    """A generator asked for a resource the provider cannot supply."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No resource available for key '{key}'")


class AdaptiveDataClearError(GeneratorFactoryError):
    """
    One or more aggregated generators failed to clear their adaptive data.

    Every child is still notified; the failures are collected here.

    Attributes:
        failures: list of (generator, exception) pairs in notification order
    """

    def __init__(self, failures: list):
        self.failures = failures
        names = ", ".join(type(generator).__name__ for generator, _ in failures)
        super().__init__(f"{len(failures)} generator(s) failed to clear adaptive data: {names}")
