"""
Домен Parsing (D2): поля документа из распознанного текста.

Вход: contracts.CroppedImage / TextFragment (от D1)
Выход: contracts.ExtractedFields
"""
