#!/usr/bin/env python3
"""
DNS Records Normalizer - Main Entry Point

This is the main entry point for the DNS Records Normalizer.
It can be run directly or imported as a module.
"""

from dns_records_normalizer.cli.main import main

if __name__ == "__main__":
    main()
