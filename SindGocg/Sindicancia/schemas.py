# SindGocg/Sindicancia/schemas.py
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

COLECAO_SINDICANCIAS = 'sindicancias'
COLECAO_OITIVAS = 'oitivas'

STATUS_AGENDADA = 'Agendada'

TIPOS_OITIVA = ('testemunha', 'sindicado')


class _DocumentoFirestore(BaseModel):
    # Os campos são guardados no Firestore com os nomes originais (camelCase)
    model_config = ConfigDict(extra='allow', populate_by_name=True)

    def para_firestore(self, **kwargs) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True, **kwargs)


class NovaSindicancia(_DocumentoFirestore):
    numero_processo: str = Field(alias='numeroProcesso', min_length=1, description="Número da Portaria SEI da sindicância.")
    portaria: str = ''
    objeto: str = ''
    sindicado: str = ''


class Sindicancia(NovaSindicancia):
    id: str
    numero_processo: str = Field(default='', alias='numeroProcesso')
    sindicante_id: str = Field(alias='sindicanteId')
    data_instauracao: Optional[datetime] = Field(default=None, alias='dataInstauracao')


class NovaOitiva(_DocumentoFirestore):
    data_oitiva: datetime = Field(alias='dataOitiva')
    tipo: Literal['testemunha', 'sindicado'] = 'testemunha'
    nome_testemunha: str = Field(default='', alias='nomeTestemunha')
    posto_graduacao: str = Field(default='', alias='postoGraduacao')
    local: str = ''


class AtualizacaoOitiva(_DocumentoFirestore):
    """Atualização parcial: apenas os campos enviados são gravados."""
    data_oitiva: Optional[datetime] = Field(default=None, alias='dataOitiva')
    status: Optional[str] = None
    tipo: Optional[Literal['testemunha', 'sindicado']] = None
    nome_testemunha: Optional[str] = Field(default=None, alias='nomeTestemunha')
    posto_graduacao: Optional[str] = Field(default=None, alias='postoGraduacao')
    transcricao: Optional[str] = None

    def para_firestore(self, **kwargs) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True, **kwargs)


class Oitiva(NovaOitiva):
    id: str
    status: str = STATUS_AGENDADA
    transcricao: str = ''


class DocumentoOficio(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    storage_path: str = Field(alias='storagePath')
    url: str
    file_name: str = Field(alias='fileName')
    hearing_id: str = Field(alias='hearingId')


class ProgressoUpload(BaseModel):
    progress: float = 0
    status: Literal['idle', 'uploading', 'completed', 'error'] = 'idle'
    error: Optional[str] = None
