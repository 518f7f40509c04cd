from django import forms

from .schemas import TIPOS_OITIVA


class SindicanciaForm(forms.Form):
    numeroProcesso = forms.CharField(
        label="Portaria SEI nº",
        max_length=100,
        widget=forms.TextInput(attrs={'class': 'form-control', 'placeholder': 'Ex: 67112.004914/2025-10'}),
    )
    portaria = forms.CharField(label="Portaria", max_length=200, required=False,
                               widget=forms.TextInput(attrs={'class': 'form-control'}))
    objeto = forms.CharField(label="Objeto", required=False,
                             widget=forms.Textarea(attrs={'class': 'form-control', 'rows': 3}))
    sindicado = forms.CharField(label="Sindicado", max_length=200, required=False,
                                widget=forms.TextInput(attrs={'class': 'form-control'}))


class OitivaForm(forms.Form):
    dataOitiva = forms.DateTimeField(
        label="Data da Oitiva",
        input_formats=['%Y-%m-%dT%H:%M'],
        widget=forms.DateTimeInput(attrs={'type': 'datetime-local', 'class': 'form-control'}, format='%Y-%m-%dT%H:%M'),
    )
    tipo = forms.ChoiceField(
        label="Tipo",
        choices=[(t, t.capitalize()) for t in TIPOS_OITIVA],
        widget=forms.Select(attrs={'class': 'form-select'}),
    )
    nomeTestemunha = forms.CharField(label="Nome", max_length=200, required=False,
                                     widget=forms.TextInput(attrs={'class': 'form-control'}))
    postoGraduacao = forms.CharField(label="Posto/Graduação", max_length=50, required=False,
                                     widget=forms.TextInput(attrs={'class': 'form-control'}))


class OficioForm(forms.Form):
    oficio = forms.FileField(label="Ofício (PDF, DOC ou DOCX)")
