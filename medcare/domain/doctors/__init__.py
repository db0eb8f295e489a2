"""Doctors domain - Doctor directory, working hours and availability lookups"""
