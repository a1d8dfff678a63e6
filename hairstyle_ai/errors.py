# hairstyle_ai/errors.py


class HairstyleAIError(Exception):
    """Base class for errors raised by hairstyle_ai."""


class ModelUnavailableError(HairstyleAIError):
    """Detection model failed to load or is not ready yet."""


class CameraError(HairstyleAIError):
    """Camera could not be opened or read."""


class ClassificationError(HairstyleAIError):
    """Face geometry cannot be classified by the chosen heuristic."""
