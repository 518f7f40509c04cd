# SindGocg/login/views.py

from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.contrib.auth import login, logout
from django.contrib.auth.forms import AuthenticationForm
from django.contrib import messages

from Sindicancia.navigation import navigate_to, redirect_based_on_auth


def login_view(request):
    # Já autenticado numa página pública: segue para o dashboard
    destino = redirect_based_on_auth(request)
    if destino is not None:
        return destino

    if request.method == 'POST':
        form = AuthenticationForm(request, data=request.POST)
        if form.is_valid():
            login(request, form.get_user())
            # Volta à página que pediu o login (login_required acrescenta ?next=)
            destino = request.POST.get('next') or request.GET.get('next')
            if destino and url_has_allowed_host_and_scheme(
                destino, allowed_hosts={request.get_host()}, require_https=request.is_secure(),
            ):
                return redirect(destino)
            return navigate_to(request, 'dashboard')
        messages.error(request, "Utilizador ou palavra-passe inválidos.")
    else:
        form = AuthenticationForm(request)

    return render(request, 'login/login.html', {'form': form})


def logout_view(request):
    logout(request)
    return navigate_to(request, 'login')
