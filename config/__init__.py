"""Configuración auxiliar (logging)"""
