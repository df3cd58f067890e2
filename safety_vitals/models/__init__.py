"""
Safety Vitals
SQLAlchemy extension instance shared by every model module.

Usage:
    from safety_vitals.models import db
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
