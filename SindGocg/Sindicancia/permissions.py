def has_sindicante_access(user):
    """Verifica se o utilizador pertence ao grupo 'Sindicante' ou é um superutilizador."""
    if not user.is_authenticated:
        return False
    return user.groups.filter(name='Sindicante').exists() or user.is_superuser


def is_owner(user, sindicancia):
    """A sindicância pertence ao utilizador (ou ele é superutilizador)?"""
    if user.is_superuser:
        return True
    return str(sindicancia.get('sindicanteId')) == str(user.pk)
