"""
Couche domaine (core).

Contient les entités métier, ports (interfaces abstraites), et objets valeur.
Cette couche n'a AUCUNE dépendance vers l'infrastructure (adapters, frameworks, BDD).

Sous-packages :
- entities/ : Entités métier (ServiceOrder, Budget, BudgetItem, StockItem, StockMovement)
- ports/ : Interfaces abstraites définissant les contrats pour les adaptateurs
- value_objects/ : Objets valeur immutables (Money, statuts, rôles)

Modules :
- exceptions : Taxonomie des erreurs métier
- authorization : Politiques rôle x statut
- validators : Validateurs de champs
- clock : Instant courant UTC
"""
