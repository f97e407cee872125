"""Bookings app package.

Бронирование занимает период [start_date, end_date) объекта. Проверка
пересечений и запись брони выполняются в одной транзакции под блокировкой
строки объекта.
"""
