"""Catalog domain - Medical services offered by the clinic (name, price, duration)"""
