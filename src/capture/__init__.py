"""
Домен Capture (D1).

Снимок -> resize -> кроп по рамке-подсказке -> CroppedImage.
"""
