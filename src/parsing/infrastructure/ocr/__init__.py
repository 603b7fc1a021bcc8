from .google_vision_ocr import GoogleVisionRecognizer

__all__ = ["GoogleVisionRecognizer"]
