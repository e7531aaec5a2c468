"""Codegraph Upgrade CLI"""
