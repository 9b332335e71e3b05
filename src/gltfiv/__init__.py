"""gltfiv — convert glTF 2.0 scenes into Open Inventor scene graphs."""

__version__ = "0.1.0"
