"""
Autofill Manager

LEGAL NOTICE:
This tool is for personal use only. It reads and deletes the form data a
browser keeps in its local Web Data database, and must only be used on the
device where it is installed with the consent of the device owner.
"""
