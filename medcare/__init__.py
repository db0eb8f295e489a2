"""MedCare - clinic appointment scheduling API"""
