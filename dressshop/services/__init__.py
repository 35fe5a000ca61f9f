"""Storefront services"""
