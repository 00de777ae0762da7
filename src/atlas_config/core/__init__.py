# src/atlas_config/core/__init__.py
"""
Core do Atlas Config.

Reúne as peças independentes de fonte: o modelo de dados tipado, o motor
de flatten/unflatten, o merge por prioridade, as coerções escalares, o
binding em dataclasses, o hashing canônico e o lock leitores-escritor.

Princípios fundamentais:
    - Nenhuma peça do core realiza I/O
    - Funções puras sempre que possível; nenhum input é mutado
    - Erros tipados a partir de `ConfigError`
"""
