#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Event registration service - API blueprints
"""

from .account import auth_bp
from .companies import companies_bp
from .events import events_bp
from .maintenance import maintenance_bp

__version__ = '1.0.0'

__all__ = ['auth_bp', 'companies_bp', 'events_bp', 'maintenance_bp']
