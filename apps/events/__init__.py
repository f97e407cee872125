"""Местные события (фестивали, концерты), которые показываются рядом с объявлениями."""
