# CLI package for VeriBound
"""
Command-line shell around the pure core.

Commands:
    veribound verify <sealed.json>
    veribound verify basel <input.json>
"""
