# cli.py

"""
Run SiteMirror from a source checkout without installing it.

Example:
    python cli.py mirror -v -t http://www.example.com/
"""
from site_mirror.cli import cli

if __name__ == '__main__':
    cli()
