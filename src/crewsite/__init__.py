"""Crew site attendance & payroll package.

Organized by feature modules (geofence, attendance, payroll, export, ...)
with a thin Flask controller layer over service/repository layers.
"""
