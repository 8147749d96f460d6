"""
Couche adaptateurs.

Les adaptateurs exposent les services applicatifs au monde exterieur.

Sous-packages :
- cli/ : Interface ligne de commande (Typer + Rich)

Chaque adaptateur dépend de core/ et services/ mais core/ ne dépend jamais
des adaptateurs.
"""
