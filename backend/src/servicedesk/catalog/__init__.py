"""Catalog module for ServiceDesk

Purchasable services: their price, category, required documents and the
custom form fields an order collects. Orders read the catalog; they never
modify it.
"""
