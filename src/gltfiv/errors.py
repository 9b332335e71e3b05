"""Custom exception hierarchy for the gltfiv converter."""


class GltfIvError(Exception):
    """Base exception for all gltfiv errors."""


class ConversionError(GltfIvError):
    """Raised when a glTF model cannot be converted."""


class IndexOutOfRangeError(ConversionError):
    """Raised when a node, mesh, material or vertex index is out of bounds."""


class TypeMismatchError(ConversionError):
    """Raised when an accessor's element type differs from the attribute's."""


class UnsupportedComponentTypeError(ConversionError):
    """Raised when an accessor's component type cannot be decoded."""


class MalformedTriangleListError(ConversionError):
    """Raised when a triangle index stream is not a multiple of three."""


class AccessorError(ConversionError):
    """Raised when accessor data is missing or cannot be read."""


class ConfigError(GltfIvError):
    """Raised when conversion options cannot be read or validated."""


class LoadError(GltfIvError):
    """Raised when a glTF source file cannot be loaded."""
