"""Card Capture - захват ID-карты по рамке-подсказке и извлечение полей."""
