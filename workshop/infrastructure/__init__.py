"""
Couche infrastructure du noyau atelier.

Ce module contient les implementations concretes des interfaces definies
dans la couche domaine (ports). Il gere les preoccupations techniques :

- persistence/ : Stockage SQL avec SQLModel (modeles, repositories, unite de travail)
- clock.py : Horloge systeme
- events.py : Bus d'evenements en memoire

Architecture hexagonale : les adapters ici implementent les ports du domaine,
permettant de changer l'implementation (ex: PostgreSQL au lieu de SQLite)
sans modifier la logique metier.
"""
