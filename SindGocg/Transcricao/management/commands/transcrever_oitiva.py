import threading

from django.core.management.base import BaseCommand, CommandError

from Sindicancia.database import DatabaseService
from Transcricao.pipeline import ServicoTranscricao


class Command(BaseCommand):
    help = 'Grava a oitiva pelo microfone local, transcreve-a em segmentos e guarda o texto na oitiva.'

    def add_arguments(self, parser):
        parser.add_argument('sindicancia_id')
        parser.add_argument('oitiva_id')
        parser.add_argument(
            '--duracao', type=float, default=None,
            help='Segundos de gravação. Sem este valor, grava até Ctrl+C.',
        )

    def handle(self, *args, **options):
        sindicancia_id = options['sindicancia_id']
        oitiva_id = options['oitiva_id']

        db_service = DatabaseService()
        resultado = db_service.get_hearing(sindicancia_id, oitiva_id)
        if not resultado['success']:
            raise CommandError(resultado['error'])
        oitiva = resultado['data']

        segmentos = []

        def on_segmento(segmento):
            if segmento.get('error'):
                self.stderr.write(self.style.ERROR(f"{segmento['formattedText']} ({segmento.get('errorMessage')})"))
                return
            segmentos.append(segmento['formattedText'])
            self.stdout.write(segmento['formattedText'])

        servico = ServicoTranscricao()
        inicio = servico.start_transcription(on_segmento)
        if not inicio['success']:
            raise CommandError(inicio['error'])

        self.stdout.write(self.style.SUCCESS('🎙️ A gravar... (Ctrl+C para terminar)'))
        try:
            # Event.wait com timeout None só termina com Ctrl+C
            threading.Event().wait(options['duracao'])
        except KeyboardInterrupt:
            pass

        fim = servico.stop_transcription()
        if not fim['success']:
            raise CommandError(fim['error'])
        servico.aguardar()

        if not segmentos:
            self.stdout.write(self.style.WARNING('Nenhuma fala transcrita; a oitiva não foi alterada.'))
            return

        texto = '\n\n'.join(segmentos)
        if oitiva.get('transcricao'):
            texto = f"{oitiva['transcricao']}\n\n{texto}"

        resultado = db_service.update_hearing(sindicancia_id, oitiva_id, {'transcricao': texto})
        if not resultado['success']:
            raise CommandError(resultado['error'])

        self.stdout.write(self.style.SUCCESS(f'Successfully saved {len(segmentos)} transcribed segments.'))
