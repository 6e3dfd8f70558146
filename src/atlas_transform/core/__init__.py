# src/atlas_transform/core/__init__.py
"""
Core do Atlas Transform.

Este pacote reúne a implementação canônica do launcher: resolução de
schemas, codec de grafos, montagem e validação da configuração, execução
via engine e rastreabilidade da run.

Princípios fundamentais:
    - Nenhuma decisão silenciosa: toda falha é tipada e fatal
    - Invariantes de configuração são verificados antes de tocar o engine
    - Estado e efeitos colaterais são sempre rastreáveis
"""
