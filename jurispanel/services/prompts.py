# Judgment-session extraction prompts and output schemas

RESUMO_SECTIONS = (
    "Causa em Julgamento",
    "Pedidos e Fundamentos",
    "Resistência e Fundamentos",
    "Questões Controversas",
    "Razões de Decidir",
    "Conclusão",
    "Legislação Aplicada",
    "Precedentes Jurisprudenciais",
    "Palavras-chave (Tags)",
)

EXTRACTION_PROMPT = """Atue como Assessor Jurídico Sênior de Gabinete de Desembargador Federal.
Analise o seguinte documento jurídico (pauta de julgamento/sessão). Extraia a lista de processos conforme o esquema JSON.

Estrutura OBRIGATÓRIA do Resumo Estruturado (Markdown) para o campo 'resumo_estruturado'. Use EXATAMENTE estes títulos (Capítulos) como H3 ('### Título').

### Causa em Julgamento
(Quem recorre, recorrido e o objeto central).

### Pedidos e Fundamentos
(Teses e alegações do recorrente).

### Resistência e Fundamentos
(Teses e alegações do recorrido).

### Questões Controversas
(Pontos controvertidos a decidir - Ratio Decidendi).

### Razões de Decidir
(Fundamentação jurídica e fática).

### Conclusão
(Dispositivo do voto, Provimento/Desprovimento e Sucumbência).

### Legislação Aplicada
(Lista de dispositivos legais citados).

### Precedentes Jurisprudenciais
(Lista de precedentes citados, formatados rigorosamente).

### Palavras-chave (Tags)
(Lista de tags na mesma linha, separadas por ponto e vírgula).

REGRAS DE FORMATAÇÃO E CONTEÚDO:

1. EMENTA (campo JSON 'ementa'):
   - Deve conter o texto INTEGRAL da ementa constante no documento.
   - Não traga apenas o cabeçalho em CAIXA ALTA. Traga todo o corpo do texto da ementa.
   - RESPEITE RIGOROSAMENTE as quebras de linha e parágrafos originais. Não junte parágrafos.

2. MARCADORES NO RESUMO:
   - Se um capítulo tiver apenas UM item/parágrafo, NÃO use marcador. Escreva o texto diretamente.
   - Se houver múltiplos itens, use marcadores padrão ('- ').

3. TAGS (no resumo):
   - No capítulo '### Palavras-chave (Tags)', apresente as tags em uma ÚNICA LINHA, separadas por ponto e vírgula (ex: Tag A; Tag B; Tag C).

4. CITAÇÃO DE PRECEDENTES:
   - Utilize pontuação oficial nos números dos processos (pontos, hifens, barras).
   - STF: RE 1.234.567. STJ: REsp 1.234.567/UF. CNJ/TRF5: 0800123-45.2024.4.05.0000.
   - Formato sugerido: [Classe] [Número Formatado], Rel. [Relator], [Órgão Julgador], Julgado em [Data].

5. GERAL:
   - Vincule advogados às partes no JSON.
   - Destaque em **negrito** informações cruciais.
   - Nomes das partes em CAIXA ALTA no resumo.
   - Gere também o array 'tags' no JSON (5 a 8 tags) independentemente da seção no resumo.
   - 'observacao' apenas se houver (Vista, Destaque, etc). Se vazio, retorne null.

Retorne JSON Array conforme schema."""

METADATA_PROMPT = """Analise o documento. Extraia metadados da sessão.
1. Órgão Julgador: Apenas a Turma/Seção (Ex: "4ª Turma"). REMOVA o nome do Tribunal.
2. Tipo de Sessão: "Sessão Virtual", "Sessão Ordinária", "Sessão Extraordinária" ou "Sessão Presencial" (seja exato).
Retorne JSON: { orgao, relator, data, hora, tipo }."""

METADATA_FIELDS = ("orgao", "relator", "data", "hora", "tipo")

PARTY_SCHEMA = {
    "type": "object",
    "properties": {
        "role": {"type": "string", "description": "Ex: Apelante, Agravado."},
        "name": {"type": "string", "description": "Nome da parte."},
        "advogado": {"type": "string", "description": "Nome do advogado desta parte específica (se houver)."},
    },
    "required": ["role", "name"],
}

CASE_SCHEMA = {
    "type": "object",
    "properties": {
        "chamada": {"type": "integer", "description": "Número de ordem sequencial."},
        "observacao": {
            "type": "string",
            "description": "Apenas se houver (Vista, Destaque, etc). Se vazio, retorne null.",
        },
        "numero_processo": {"type": "string"},
        "classe": {"type": "string"},
        "partes": {"type": "array", "items": PARTY_SCHEMA},
        "ementa": {"type": "string", "description": "O texto original integral da Ementa."},
        "resumo_estruturado": {"type": "string", "description": "Texto completo formatado com capítulos."},
        "tags": {
            "type": "array",
            "items": {"type": "string"},
            "minItems": 5,
            "maxItems": 8,
            "description": (
                "Lista de 5 a 8 tags (expressões nominais curtas) com institutos jurídicos, "
                "temas decisórios ou categorias normativas relevantes."
            ),
        },
    },
    "required": ["chamada", "numero_processo", "classe", "partes", "ementa", "resumo_estruturado", "tags"],
}

CASE_LIST_SCHEMA = {"type": "array", "items": CASE_SCHEMA}

METADATA_SCHEMA = {
    "type": "object",
    "properties": {field: {"type": "string"} for field in METADATA_FIELDS},
}

# Tool/response-format APIs only accept an object at the root.
CASE_LIST_WRAPPER_KEY = "processos"


def wrap_in_object(schema: dict, key: str = CASE_LIST_WRAPPER_KEY) -> dict:
    return {"type": "object", "properties": {key: schema}, "required": [key]}
