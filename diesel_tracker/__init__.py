"""Diesel Tracker - suivi des pleins de gasoil / diesel fill tracker."""
