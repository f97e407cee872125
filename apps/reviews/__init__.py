"""Reviews app package.

Один пользователь оставляет не более одного отзыва на объект; после каждого
изменения пересчитываются ``average_rating`` и ``review_count`` объекта.
"""
