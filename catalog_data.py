# --- START OF FILE catalog_data.py ---

# =============================================================================
# STATIC CATALOG DATA
# =============================================================================
# EXAM_CATALOG is the declarative runtime search catalog: modality -> body
# region -> exam names, each flagged with whether a side must be chosen.
# Declaration order matters; search results come back in this order.
#
# default_templates() builds the fixed seed set of report templates loaded
# into an empty store before any document import.

from typing import Dict, List, Tuple

from template_models import CatalogEntry, RegionGroup, TemplateRecord, TemplateSection

_CatalogDefinitions = Dict[str, List[Tuple[str, List[Tuple[str, bool]]]]]

_EXAM_DEFINITIONS: _CatalogDefinitions = {
    'USG': [
        ('Abdome e Pelve', [
            ('USG Abdome Total', False),
            ('USG Abdome Superior', False),
            ('USG Parede Abdominal', False),
            ('USG Região Inguinal', True),
            ('USG Pelve Transvaginal', False),
            ('USG Pelve Suprapúbica', False),
            ('USG Rins e Vias Urinárias', False),
            ('USG Próstata Suprapúbica', False),
            ('USG Próstata Transretal', False),
        ]),
        ('Músculo-Esquelético', [
            ('USG Ombro', True),
            ('USG Cotovelo', True),
            ('USG Punho', True),
            ('USG Mão', True),
            ('USG Quadril', True),
            ('USG Joelho', True),
            ('USG Tornozelo', True),
            ('USG Pé', True),
            ('USG Articulação Escaleno-Clavicular', True),
            ('USG Esternoclavicular', True),
            ('USG Tendão de Aquiles', True),
            ('USG Músculo Adutor', True),
            ('USG Coxa', True),
            ('USG Perna', True),
        ]),
        ('Pequenas Partes', [
            ('USG Tireóide', False),
            ('USG Cervical', False),
            ('USG Glândulas Salivares', False),
            ('USG Bolsa Escrotal', False),
            ('USG Mamas', False),
            ('USG Axilas', True),
            ('USG Partes Moles', False),
            ('USG Olho / Órbita', True),
            ('USG Escrotal com Doppler', False),
        ]),
        ('Vascular (Doppler)', [
            ('Doppler Carótidas e Vertebrais', False),
            ('Doppler Venoso de Membro Inferior', True),
            ('Doppler Arterial de Membro Inferior', True),
            ('Doppler Venoso de Membro Superior', True),
            ('Doppler Arterial de Membro Superior', True),
            ('Doppler de Aorta e Ilíacas', False),
            ('Doppler de Artérias Renais', False),
            ('Doppler Transcraniano', False),
            ('Doppler Hepático', False),
        ]),
        ('Obstétrico', [
            ('USG Obstétrico Inicial', False),
            ('USG Obstétrico Morfológico 1º Trimestre', False),
            ('USG Obstétrico Morfológico 2º Trimestre', False),
            ('USG Obstétrico com Doppler', False),
            ('USG Perfil Biofísico Fetal', False),
        ]),
    ],
    'RX': [
        ('Crânio e Face', [
            ('RX Crânio (PA/Lateral)', False),
            ('RX Seios da Face', False),
            ('RX Cavum', False),
            ('RX Ossos Nasais', False),
            ('RX Órbitas', False),
            ('RX Mandíbula', False),
            ('RX Articulação Temporomandibular (ATM)', False),
        ]),
        ('Coluna', [
            ('RX Coluna Cervical', False),
            ('RX Coluna Dorsal', False),
            ('RX Coluna Lombar', False),
            ('RX Sacro-Coccígea', False),
            ('RX Coluna Provas Dinâmicas', False),
            ('RX Panorâmica de Coluna (Espinografia)', False),
        ]),
        ('Membros Superiores', [
            ('RX Ombro', True),
            ('RX Clavícula', True),
            ('RX Escápula', True),
            ('RX Braço', True),
            ('RX Cotovelo', True),
            ('RX Antebraço', True),
            ('RX Punho', True),
            ('RX Mão', True),
            ('RX Dedos da Mão', True),
            ('RX Escafóide', True),
            ('RX Idade Óssea (Mão e Punho)', False),
        ]),
        ('Membros Inferiores', [
            ('RX Bacia', False),
            ('RX Quadril', True),
            ('RX Coxa (Fêmur)', True),
            ('RX Joelho', True),
            ('RX Perna (Tíbia/Fíbula)', True),
            ('RX Tornozelo', True),
            ('RX Pé', True),
            ('RX Calcanêo', True),
            ('RX Dedos do Pé', True),
            ('RX Escanometria de Membros Inferiores', False),
        ]),
        ('Tórax', [
            ('RX Tórax (PA/Lateral)', False),
            ('RX Arcos Costais', True),
            ('RX Esterno', False),
            ('RX Coração e Vasos da Base', False),
        ]),
    ],
    'TC': [
        ('Crânio e Pescoço', [
            ('TC Crânio', False),
            ('TC Mastoides / Ouvidos', False),
            ('TC Orbitas', False),
            ('TC Seios da Face / Face', False),
            ('TC Pescoço / Cervical', False),
            ('Angio-TC de Crânio', False),
            ('Angio-TC de Pescoço', False),
        ]),
        ('Coluna', [
            ('TC Coluna Cervical', False),
            ('TC Coluna Dorsal', False),
            ('TC Coluna Lombar', False),
            ('TC Sacro-Ilíacas', False),
        ]),
        ('Tórax e Abdome', [
            ('TC Tórax', False),
            ('TC Tórax de Alta Resolução', False),
            ('TC Abdome Total', False),
            ('TC Abdome Superior', False),
            ('TC Pelve', False),
            ('TC Vias Urinárias (Urotomografia)', False),
            ('Angio-TC de Aorta Torácica', False),
            ('Angio-TC de Aorta Abdominal', False),
        ]),
        ('Músculo-Esquelético', [
            ('TC Ombro', True),
            ('TC Braço', True),
            ('TC Cotovelo', True),
            ('TC Punho', True),
            ('TC Mão', True),
            ('TC Bacia', False),
            ('TC Quadril', True),
            ('TC Coxa', True),
            ('TC Joelho', True),
            ('TC Perna', True),
            ('TC Tornozelo', True),
            ('TC Pé', True),
        ]),
    ],
    'RM': [
        ('Crânio e Neuro', [
            ('RM Crânio / Encéfalo', False),
            ('RM Sela Turcica / Hipófise', False),
            ('RM Orbitas', False),
            ('RM Ouvidos / Mastoides / Condutos', False),
            ('RM Pescoço / Cervical', False),
            ('RM Base do Crânio', False),
            ('Angio-RM Arterial Crânio', False),
            ('Angio-RM Venosa Crânio', False),
            ('RM Plexo Braquial', True),
        ]),
        ('Coluna', [
            ('RM Coluna Cervical', False),
            ('RM Coluna Dorsal', False),
            ('RM Coluna Lombar', False),
            ('RM Sacro-Ilíacas', False),
            ('RM Sacro-Coccígea', False),
        ]),
        ('Abdome e Pelve', [
            ('RM Abdome Superior', False),
            ('RM Pelve', False),
            ('RM Multiparamétrica de Próstata', False),
            ('Colangio-Ressonância', False),
            ('RM Fetal', False),
            ('RM Pelve Feminina (Endometriose)', False),
        ]),
        ('Músculo-Esquelético', [
            ('RM Ombro', True),
            ('RM Cotovelo', True),
            ('RM Punho', True),
            ('RM Mão', True),
            ('RM Quadril', True),
            ('RM Coxa', True),
            ('RM Joelho', True),
            ('RM Perna', True),
            ('RM Tornozelo', True),
            ('RM Pé / Antepé', True),
            ('RM Esternoclavicular', True),
        ]),
    ],
    'MG': [
        ('Mama', [
            ('Mamografia Digital', True),
            ('Mamografia com Tomossíntese', True),
        ]),
    ],
    'OT': [
        ('Outros', [
            ('Densitometria Óssea (Fêmur e Coluna)', False),
            ('Densitometria Óssea (Corpo Inteiro)', False),
            ('Medicina Nuclear (Cintilografia)', False),
            ('PET-CT', False),
        ]),
    ],
}


def _build_catalog(definitions: _CatalogDefinitions) -> Dict[str, List[RegionGroup]]:
    catalog: Dict[str, List[RegionGroup]] = {}
    for modality, regions in definitions.items():
        catalog[modality] = [
            RegionGroup(region_name, tuple(CatalogEntry(name, lateral, region_name, modality)
                                           for name, lateral in exams))
            for region_name, exams in regions
        ]
    return catalog


EXAM_CATALOG: Dict[str, List[RegionGroup]] = _build_catalog(_EXAM_DEFINITIONS)


# -----------------------------------------------------------------------------
# Default seed templates
# -----------------------------------------------------------------------------

_USG_TECHNIQUE = 'Estudo ultrassonográfico realizado em equipamento digital com sondas multifrequenciais.'
_TC_TECHNIQUE = 'Imagens obtidas em aquisição tomográficas com multidetectores.'
_RM_SPIN_ECHO = 'Exame realizado pela técnica spin-eco com aquisições multiplanares.'

# Ultrasound and some angiography templates close with 'Impressão Diagnóstica';
# the rest use 'Impressão diagnóstica'.
_USG_LABELS = ('Técnica', 'Análise', 'Impressão Diagnóstica')
_STANDARD_LABELS = ('Técnica', 'Análise', 'Impressão diagnóstica')


def _sections(labels) -> List[TemplateSection]:
    """Labels are plain strings or (label, default content) pairs."""
    sections = []
    for item in labels:
        if isinstance(item, tuple):
            sections.append(TemplateSection(item[0], item[1]))
        else:
            sections.append(TemplateSection(item, ''))
    return sections


def _seed(title, modality, region, labels=_STANDARD_LABELS, complexity=1, variants=None, target_sex=None):
    return TemplateRecord(title=title, modality=modality, body_region=region, sections=_sections(labels),
                          complexity=complexity, variants=frozenset(variants) if variants else None,
                          target_sex=target_sex)


def _usg(title, region, complexity=1, labels=_USG_LABELS, **kwargs):
    return _seed(title, 'USG', region, labels, complexity, **kwargs)


def default_templates() -> List[TemplateRecord]:
    """
    Fresh copies of the seed set.

    A new list is built on every call because TemplateStore.create assigns
    ids onto the records it stores.
    """
    return [
        # USG
        _usg('USG Abdome Superior', 'Abdome', labels=[('Técnica', _USG_TECHNIQUE), 'Análise', 'Impressão Diagnóstica']),
        _usg('USG Abdome Total', 'Abdome', labels=[('Técnica', _USG_TECHNIQUE), 'Análise', 'Impressão Diagnóstica']),
        _usg('USG Aparelho Urinário', 'Urinário'),
        _usg('USG Articulação Coxofemoral Infantil', 'Quadril', complexity=3),
        _usg('USG Bolsa Escrotal', 'Genital', target_sex='M'),
        _usg('USG Bolsa Escrotal com Doppler', 'Genital', complexity=3, target_sex='M'),
        _usg('USG Cotovelo Direito', 'Cotovelo', complexity=2, variants=['USG Cotovelo Esquerdo'],
             labels=[('Procedimento', 'Estudo ultrassonográfico realizado em equipamento digital com o uso '
                                      'de sondas multifrequenciais.'),
                     'Achados', 'Impressão Diagnóstica']),
        _usg('USG Joelho Direito', 'Joelho', complexity=2, variants=['USG Joelho Esquerdo']),
        _usg('USG Mamas', 'Mamas', complexity=3, labels=('Informações Clínicas',) + _USG_LABELS),
        _usg('USG Mão Direita', 'Mão', complexity=2, variants=['USG Mão Esquerda'],
             labels=('Técnica', 'Achados', 'Conclusão')),
        _usg('USG Ombro Direito', 'Ombro', complexity=2, variants=['USG Ombro Esquerdo']),
        _usg('USG Parede Abdominal', 'Abdome'),
        _usg('USG Partes Moles', 'Partes Moles', labels=('Indicação',) + _USG_LABELS),
        _usg('USG Pelve Suprapúbica', 'Pelve'),
        _usg('USG Pelve Suprapúbica com Doppler', 'Pelve', complexity=3),
        _usg('USG Pelve Transvaginal', 'Pelve', complexity=3, target_sex='F'),
        _usg('USG Pelve Transvaginal com Doppler', 'Pelve', complexity=3, target_sex='F'),
        _usg('USG Próstata Suprapúbica', 'Próstata', target_sex='M'),
        _usg('USG Punho Direito', 'Punho', complexity=2, variants=['USG Punho Esquerdo']),
        _usg('USG Quadril', 'Quadril', complexity=3),
        _usg('USG Região Inguinal Direita', 'Inguinal', complexity=2,
             variants=['USG Região Inguinal Esquerda', 'USG Região Inguinal Bilateral']),
        _usg('USG Rins e Vias Urinárias', 'Renal'),
        _usg('USG Rins/Vias Urinárias e Próstata', 'Renal'),
        _usg('USG Tireóide', 'Tireóide'),
        _usg('USG Tireóide com Doppler', 'Tireóide', complexity=3),
        _usg('USG Tornozelo Direito', 'Tornozelo', complexity=2, variants=['USG Tornozelo Esquerdo']),
        _usg('USG Cervical', 'Cervical'),

        # TC
        _seed('TC Abdome Total', 'TC', 'Abdome', [('Técnica', _TC_TECHNIQUE), 'Análise', 'Impressão diagnóstica']),
        _seed('TC Abdome Total — Avaliação Oncológica (Pâncreas)', 'TC', 'Abdome',
              [('Técnica', 'Imagens obtidas em aquisição tomográficas com multidetectores antes e após uso do '
                           'meio de contraste iodado endovenoso.'),
               ('Informações clínicas', 'Estadiamento de neoplasia pancreática.'),
               'Análise', 'Impressão diagnóstica'], complexity=4),
        _seed('TC Abdome Total — Protocolo Hepatopatia Crônica', 'TC', 'Abdome',
              ['Técnica', 'Informações Clínicas', 'Achados', 'Impressão diagnóstica'], complexity=4),
        _seed('TC Coluna Cervical', 'TC', 'Coluna'),
        _seed('TC Coluna Lombo-Sacra', 'TC', 'Coluna'),
        _seed('TC Coluna Lombar', 'TC', 'Coluna', [('Técnica', _TC_TECHNIQUE), 'Análise', 'Conclusão']),
        _seed('TC Cotovelo', 'TC', 'Cotovelo'),
        _seed('TC Crânio', 'TC', 'Crânio',
              [('Técnica', 'Imagens obtidas em aquisição multidetectores sem o uso do meio de contraste '
                           'iodado endovenoso.'),
               'Análise', 'Impressão diagnóstica']),
        _seed('TC Crânio — Idoso', 'TC', 'Crânio'),
        _seed('TC Crânio — Protocolo AVC', 'TC', 'Crânio',
              [('Técnica', 'Imagens obtidas em aquisição multidetectores.'), 'Análise', 'Impressão diagnóstica'],
              complexity=4),
        _seed('TC Joelho', 'TC', 'Joelho'),
        _seed('TC Mastoides', 'TC', 'Mastoides'),
        _seed('TC Ombro', 'TC', 'Ombro'),
        _seed('TC Pelve Feminina', 'TC', 'Pelve',
              ['Técnica', 'Indicação Clínica', 'Análise', 'Impressão diagnóstica'], complexity=3, target_sex='F'),
        _seed('TC Pelve Masculina (Próstata)', 'TC', 'Pelve', complexity=3, target_sex='M'),
        _seed('TC Pescoço', 'TC', 'Pescoço'),
        _seed('TC Punho', 'TC', 'Punho'),
        _seed('TC Bacia', 'TC', 'Bacia', ('Indicação',) + _STANDARD_LABELS),
        _seed('TC Seios da Face', 'TC', 'Face'),
        _seed('TC Região Sacro-Coccígea', 'TC', 'Sacro'),
        _seed('TC Tórax', 'TC', 'Tórax'),
        _seed('TC Tórax — Avaliação Oncológica', 'TC', 'Tórax', complexity=4),

        # RM
        _seed('RM Abdome Total', 'RM', 'Abdome', complexity=3),
        _seed('RM Antepé', 'RM', 'Pé',
              [('Método', 'Estudo realizado com a técnica FE e FSE, com cortes multiplanares.'),
               'Análise', 'Impressão diagnóstica']),
        _seed('RM ATM', 'RM', 'ATM', complexity=3),
        _seed('RM Coluna Cervical', 'RM', 'Coluna'),
        _seed('RM Coluna Dorsal', 'RM', 'Coluna'),
        _seed('RM Coluna Lombar', 'RM', 'Coluna', [('Técnica', _RM_SPIN_ECHO), 'Análise', 'Impressão diagnóstica']),
        _seed('RM Coluna Lombar — Degenerativo (Idoso)', 'RM', 'Coluna',
              [('Método', _RM_SPIN_ECHO), 'Análise', 'Impressão diagnóstica'], complexity=3),
        _seed('RM Cotovelo', 'RM', 'Cotovelo'),
        _seed('RM Crânio', 'RM', 'Crânio',
              [('Técnica', 'Estudo realizado com várias técnicas de modificação da magnetização...'),
               'Análise', 'Impressão diagnóstica']),
        _seed('RM Crânio — Esclerose Múltipla', 'RM', 'Crânio', complexity=4),
        _seed('RM Joelho', 'RM', 'Joelho'),
        _seed('RM Mão/Dedos', 'RM', 'Mão'),
        _seed('RM Ombro', 'RM', 'Ombro', ('Indicação',) + _STANDARD_LABELS),
        _seed('RM Órbitas', 'RM', 'Órbitas'),
        _seed('RM Ouvido', 'RM', 'Ouvido'),
        _seed('RM Pé e Tornozelo', 'RM', 'Pé'),
        _seed('RM Pelve — Avaliação Oncológica Reto', 'RM', 'Pelve',
              ['Técnica', 'Informações Clínicas', 'Análise', 'Impressão diagnóstica'], complexity=4),
        _seed('RM Pelve Oncológica (Colo Uterino/Endométrio)', 'RM', 'Pelve', complexity=4, target_sex='F'),
        _seed('RM Pelve (Endometriose)', 'RM', 'Pelve', complexity=4, target_sex='F'),
        _seed('RM Pelve Fístula Perianal', 'RM', 'Pelve', complexity=4),
        _seed('RM Perna Direita', 'RM', 'Perna', ['Procedimento', 'Achados', 'Impressão diagnóstica']),
        _seed('RM Multiparamétrica Próstata', 'RM', 'Próstata',
              ('Informações Clínicas',) + _STANDARD_LABELS, complexity=4, target_sex='M'),
        _seed('RM Punho', 'RM', 'Punho', ['Procedimento', 'Análise', 'Impressão diagnóstica']),
        _seed('RM Quadril', 'RM', 'Quadril'),
        _seed('RM Sacro Ilíacas', 'RM', 'Sacro'),
        _seed('RM Tórax', 'RM', 'Tórax'),

        # RX
        _seed('RX Coluna Lombar', 'RX', 'Coluna', ['Análise', 'Impressão diagnóstica']),
        _seed('RX Tórax', 'RX', 'Tórax', ['Análise', 'Impressão diagnóstica']),

        # MMG
        _seed('Mamografia', 'MMG', 'Mamas',
              ['Procedimento', 'Informações Clínicas', 'Achados', 'Comparação', 'Conclusão'], complexity=3),

        # ANGIO
        _seed('Angiorressonância Arterial Cervical', 'ANGIO', 'Cervical', complexity=3),
        _seed('Angiorressonância Arterial do Crânio', 'ANGIO', 'Crânio', complexity=3),
        _seed('Angiorressonância Venosa do Crânio', 'ANGIO', 'Crânio', complexity=3),
        _seed('Angiotomografia das Artérias Coronárias', 'ANGIO', 'Coração', _USG_LABELS, complexity=4),
        _seed('Angiotomografia Computadorizada do Tórax', 'ANGIO', 'Tórax', complexity=3),
        _seed('Angiotomografia Torácica e Abdominal', 'ANGIO', 'Tórax/Abdome', _USG_LABELS, complexity=3),
    ]

# --- END OF FILE catalog_data.py ---
