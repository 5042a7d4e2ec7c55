# Crownix Vault - Local HTTP backend for the desktop frontend
