"""Reports domain - Popularity statistics and CSV/XML period reports"""
