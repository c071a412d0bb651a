# src/capsule_flow/core/__init__.py
"""
Core do Capsule Flow.

Este pacote reúne a implementação independente de editor e de Capsules
concretas:
    - graph  → modelo de dados do Flow e contexto de execução
    - engine → compatibilidade, validação, planejamento e execução
    - config → carregamento, merge e políticas de execução

O core não faz I/O de rede nem de arquivo durante a execução: ele apenas
chama `execute` das Capsules recebidas e propaga o que elas retornam.
"""
