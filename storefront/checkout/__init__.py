"""
Module 'checkout' (feature-first): modèles du panier, calcul des montants,
identifiants de transaction et orchestration du tunnel de commande.
"""
