"""Панель администратора: модерация, пользователи, тарифы, аналитика."""
