"""
sublayouts.config - Configuracion en Python plano (keymaps por defecto).
"""
