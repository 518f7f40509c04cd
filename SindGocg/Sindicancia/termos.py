# SindGocg/Sindicancia/termos.py
import io
import re

from docx import Document
from docx.enum.text import WD_LINE_SPACING
from docx.shared import Cm, Inches, Pt

NUMERO_PROCESSO_VAZIO = '______________________'
NOME_VAZIO = '______________________________________'
POSTO_GRADUACAO_VAZIO = '______________________'

TERMO_TESTEMUNHA = """\
TERMO DE OITIVA DE TESTEMUNHA

Aos ____ dias do mês de __________ do ano de ______, nesta cidade de ____________________, no Estado de ____________________, nas dependências de ____________________, sito à __________________________________, iniciou-se às ____h____min a audiência da sindicância de Portaria SEI nº {numero_processo}.

Estando presentes este(a) sindicante e a testemunha abaixo qualificada, foi inquirida sobre os fatos, declarando o seguinte:

TESTEMUNHA: {nome}, posto/graduação {posto_graduacao}, RG nº ______________________, Id Funcional ______________________, lotado(a) em ______________________, filho(a) de ______________________ e de ______________________.

Após prestar o compromisso legal de dizer a verdade,

PERGUNTADO sobre seu conhecimento dos fatos relativos ao extravio da capa de aproximação, RESPONDEU: ________________________________________________________________________________________________________________________________________________________________.

PERGUNTADO se presenciou algum ato ou situação envolvendo a citada capa de aproximação, RESPONDEU: ________________________________________________________________________________________________________________________________________________________________.

PERGUNTADO se possui informações adicionais que possam contribuir para a elucidação, RESPONDEU: ________________________________________________________________________________________________________________________________________________________________.

Nada mais tendo a declarar, deu-se por findo o presente termo, iniciado às ____h____min e concluído às ____h____min, que, depois de lido e achado conforme, vai assinado por mim, sindicante, e pela testemunha.

________________________________________
TESTEMUNHA
Posto/Graduação: {posto_graduacao}
RG: ______________________ | Id Funcional: ______________________

________________________________________
SINDICANTE
Posto/Graduação: ______________________
RG: ______________________ | Id Funcional: ______________________"""

TERMO_SINDICADO = """\
TERMO DE OITIVA DE SINDICADO

Aos ____ dias do mês de __________ do ano de ______, nesta cidade de ____________________, no Estado de ____________________, nas dependências de ____________________, sito à __________________________________, iniciou-se às ____h____min a audiência da sindicância de Portaria SEI nº {numero_processo}.

Estando presentes este(a) sindicante e o(a) sindicado(a), foi inquirido(a) sobre os fatos, declarando o seguinte:

SINDICADO(A): {nome}, posto/graduação {posto_graduacao}, RG nº ______________________, Id Funcional ______________________, lotado(a) em ______________________, filho(a) de ______________________ e de ______________________.

Após assumir o compromisso de dizer a verdade,

PERGUNTADO sobre a data e circunstâncias em que verificou o extravio da capa de aproximação, RESPONDEU: ________________________________________________________________________________________________________________________________________________________________.

PERGUNTADO sobre onde a capa de aproximação estava acondicionada e quais providências tomou ao perceber o extravio, RESPONDEU: ________________________________________________________________________________________________________________________________________________________________.

PERGUNTADO se tem ciência de quem poderia ter manuseado a capa ou qualquer detalhe adicional, RESPONDEU: ________________________________________________________________________________________________________________________________________________________________.

PERGUNTADO se deseja acrescentar algo, RESPONDEU: ________________________________________________________________________________________________________________________________________________________________.

Nada mais tendo a declarar, deu-se por findo o presente termo, iniciado às ____h____min e concluído às ____h____min, que, depois de lido e achado conforme, vai assinado por mim, sindicante, e pelo(a) sindicado(a).

________________________________________
SINDICADO(A)
Posto/Graduação: {posto_graduacao}
RG: ______________________ | Id Funcional: ______________________

________________________________________
SINDICANTE
Posto/Graduação: ______________________
RG: ______________________ | Id Funcional: ______________________"""


def _campos(data):
    # Aceita os nomes usados no Firestore e os nomes alternativos do formulário
    return {
        'numero_processo': data.get('numeroProcesso') or data.get('inquiryId') or NUMERO_PROCESSO_VAZIO,
        'nome': data.get('nomeTestemunha') or data.get('witnessName') or NOME_VAZIO,
        'posto_graduacao': data.get('postoGraduacao') or data.get('witnessRank') or POSTO_GRADUACAO_VAZIO,
    }


def get_termo_testemunha(data):
    return TERMO_TESTEMUNHA.format(**_campos(data))


def get_termo_sindicado(data):
    return TERMO_SINDICADO.format(**_campos(data))


def get_template(tipo, data):
    """Termo de sindicado para 'sindicado'; qualquer outro tipo recebe o termo de testemunha."""
    if tipo == 'sindicado':
        return get_termo_sindicado(data)
    return get_termo_testemunha(data)


def exportar_termo_docx(texto):
    """
    Converte o texto de um termo num documento Word, com a mesma
    formatação de página dos documentos oficiais (Times New Roman 12).
    Trechos entre ** ficam a negrito. Devolve os bytes do .docx.
    """
    document = Document()

    style = document.styles['Normal']
    font = style.font
    font.name = 'Times New Roman'
    font.size = Pt(12)

    section = document.sections[0]
    section.top_margin = Cm(1.5)
    section.bottom_margin = Cm(2.54)
    section.left_margin = Cm(2.15)
    section.right_margin = Cm(2.5)
    section.gutter = Cm(0)

    for linha in texto.split('\n'):
        p = document.add_paragraph()

        p_format = p.paragraph_format
        p_format.left_indent = Inches(0)
        p_format.first_line_indent = Inches(0)
        p_format.line_spacing_rule = WD_LINE_SPACING.SINGLE
        p_format.space_before = Pt(0)
        p_format.space_after = Pt(0)

        for parte in re.split(r'(\*\*.*?\*\*)', linha):
            if not parte:
                continue
            if parte.startswith('**') and parte.endswith('**'):
                p.add_run(parte.strip('*')).bold = True
            else:
                p.add_run(parte)

    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()
