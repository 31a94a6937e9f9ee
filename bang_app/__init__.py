"""bang! URL shortener."""
