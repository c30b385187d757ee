# src/shared/__init__.py
"""
Общий код сервисов: модели, события, исключения, авторизация и обработчики ошибок.
"""
