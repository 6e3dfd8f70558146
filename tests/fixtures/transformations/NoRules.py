"""Módulo sem regras declaradas."""

VALUE = 1
