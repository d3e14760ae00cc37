# cozinha/services/term_dictionary.py
"""Tabelas de tradução inglês (catálogo TheMealDB) -> português (usuário)."""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

CATEGORIES: Mapping[str, str] = MappingProxyType({
    "Beef": "Carne Bovina",
    "Breakfast": "Café da Manhã",
    "Chicken": "Frango",
    "Dessert": "Sobremesa",
    "Goat": "Cabra",
    "Lamb": "Cordeiro",
    "Miscellaneous": "Diversos",
    "Pasta": "Massa",
    "Pork": "Porco",
    "Seafood": "Frutos do Mar",
    "Side": "Acompanhamento",
    "Starter": "Entrada",
    "Vegan": "Vegano",
    "Vegetarian": "Vegetariano",
})

ORIGINS: Mapping[str, str] = MappingProxyType({
    "American": "Americana",
    "British": "Britânica",
    "Canadian": "Canadense",
    "Chinese": "Chinesa",
    "Croatian": "Croata",
    "Dutch": "Holandesa",
    "Egyptian": "Egípcia",
    "French": "Francesa",
    "Greek": "Grega",
    "Indian": "Indiana",
    "Irish": "Irlandesa",
    "Italian": "Italiana",
    "Jamaican": "Jamaicana",
    "Japanese": "Japonesa",
    "Kenyan": "Queniana",
    "Malaysian": "Malaia",
    "Mexican": "Mexicana",
    "Moroccan": "Marroquina",
    "Polish": "Polonesa",
    "Portuguese": "Portuguesa",
    "Russian": "Russa",
    "Spanish": "Espanhola",
    "Thai": "Tailandesa",
    "Tunisian": "Tunisiana",
    "Turkish": "Turca",
    "Unknown": "Desconhecida",
    "Vietnamese": "Vietnamita",
})

INGREDIENTS: Mapping[str, str] = MappingProxyType({
    # Carnes
    "Chicken": "Frango",
    "Chicken Breast": "Peito de Frango",
    "Beef": "Carne Bovina",
    "Minced Beef": "Carne Moída",
    "Pork": "Porco",
    "Lamb": "Cordeiro",
    "Turkey": "Peru",
    "Fish": "Peixe",
    "Salmon": "Salmão",
    "Tuna": "Atum",
    "Shrimp": "Camarão",
    "Prawns": "Camarões",
    "Crab": "Caranguejo",
    "Lobster": "Lagosta",
    "Mussels": "Mexilhões",
    "Bacon": "Bacon",
    # Vegetais
    "Onion": "Cebola",
    "Onions": "Cebolas",
    "Garlic": "Alho",
    "Tomato": "Tomate",
    "Tomatoes": "Tomates",
    "Potato": "Batata",
    "Potatoes": "Batatas",
    "Carrot": "Cenoura",
    "Carrots": "Cenouras",
    "Bell Pepper": "Pimentão",
    "Red Pepper": "Pimentão Vermelho",
    "Pepper": "Pimenta",
    "Mushroom": "Cogumelo",
    "Mushrooms": "Cogumelos",
    "Broccoli": "Brócolis",
    "Spinach": "Espinafre",
    "Lettuce": "Alface",
    "Cabbage": "Repolho",
    "Corn": "Milho",
    "Cucumber": "Pepino",
    "Zucchini": "Abobrinha",
    "Eggplant": "Berinjela",
    "Green Beans": "Vagem",
    "Beans": "Feijão",
    "Peas": "Ervilhas",
    "Avocado": "Abacate",
    # Frutas
    "Apple": "Maçã",
    "Banana": "Banana",
    "Orange": "Laranja",
    "Lemon": "Limão",
    "Lime": "Lima",
    "Strawberry": "Morango",
    "Strawberries": "Morangos",
    "Blueberry": "Mirtilo",
    "Grape": "Uva",
    "Pineapple": "Abacaxi",
    "Mango": "Manga",
    "Peach": "Pêssego",
    "Cherry": "Cereja",
    # Grãos e cereais
    "Rice": "Arroz",
    "Pasta": "Massa",
    "Spaghetti": "Espaguete",
    "Bread": "Pão",
    "Flour": "Farinha",
    "Plain Flour": "Farinha de Trigo",
    "Oats": "Aveia",
    "Quinoa": "Quinoa",
    "Barley": "Cevada",
    # Laticínios
    "Milk": "Leite",
    "Condensed Milk": "Leite Condensado",
    "Cheese": "Queijo",
    "Parmesan": "Parmesão",
    "Butter": "Manteiga",
    "Cream": "Creme",
    "Double Cream": "Creme de Leite",
    "Yogurt": "Iogurte",
    "Eggs": "Ovos",
    "Egg": "Ovo",
    # Temperos e ervas
    "Salt": "Sal",
    "Black Pepper": "Pimenta Preta",
    "Basil": "Manjericão",
    "Oregano": "Orégano",
    "Thyme": "Tomilho",
    "Rosemary": "Alecrim",
    "Parsley": "Salsa",
    "Cilantro": "Coentro",
    "Coriander": "Coentro",
    "Bay Leaves": "Folhas de Louro",
    "Cumin": "Cominho",
    "Paprika": "Páprica",
    "Cinnamon": "Canela",
    "Ginger": "Gengibre",
    "Turmeric": "Açafrão",
    # Óleos e vinagres
    "Olive Oil": "Azeite de Oliva",
    "Vegetable Oil": "Óleo Vegetal",
    "Coconut Oil": "Óleo de Coco",
    "Vinegar": "Vinagre",
    "Balsamic Vinegar": "Vinagre Balsâmico",
    # Outros
    "Sugar": "Açúcar",
    "Brown Sugar": "Açúcar Mascavo",
    "Honey": "Mel",
    "Soy Sauce": "Molho de Soja",
    "Tomato Paste": "Extrato de Tomate",
    "Tomato Puree": "Purê de Tomate",
    "Coconut Milk": "Leite de Coco",
    "Chocolate": "Chocolate",
    "Wine": "Vinho",
    "Beer": "Cerveja",
    "Stock": "Caldo",
    "Broth": "Caldo",
    "Water": "Água",
})

UNITS: Mapping[str, str] = MappingProxyType({
    "cup": "xícara",
    "cups": "xícaras",
    "tbsp": "colher de sopa",
    "tbs": "colher de sopa",
    "tsp": "colher de chá",
    "tablespoon": "colher de sopa",
    "tablespoons": "colheres de sopa",
    "teaspoon": "colher de chá",
    "teaspoons": "colheres de chá",
    "lb": "libra",
    "lbs": "libras",
    "litre": "litro",
    "litres": "litros",
    "quart": "quarto",
    "quarts": "quartos",
    "gallon": "galão",
    "gallons": "galões",
    "slice": "fatia",
    "slices": "fatias",
    "piece": "pedaço",
    "pieces": "pedaços",
    "clove": "dente",
    "cloves": "dentes",
    "bunch": "maço",
    "pinch": "pitada",
    "handful": "punhado",
    "can": "lata",
    "cans": "latas",
    "jar": "pote",
    "jars": "potes",
    "packet": "pacote",
    "packets": "pacotes",
    "bottle": "garrafa",
    "bottles": "garrafas",
    "chopped": "picado",
    "sliced": "fatiado",
    "to taste": "a gosto",
})

INSTRUCTION_WORDS: Mapping[str, str] = MappingProxyType({
    # Verbos de cozinha
    "Heat": "Aqueça",
    "Preheat": "Preaqueça",
    "Cook": "Cozinhe",
    "Boil": "Ferva",
    "Bring to the boil": "Leve à fervura",
    "Simmer": "Deixe ferver em fogo baixo",
    "Fry": "Frite",
    "Sauté": "Refogue",
    "Bake": "Asse",
    "Roast": "Asse",
    "Grill": "Grelhe",
    "Steam": "Cozinhe no vapor",
    "Mix": "Misture",
    "Stir": "Mexa",
    "Whisk": "Bata",
    "Blend": "Bata no liquidificador",
    "Chop": "Pique",
    "Dice": "Corte em cubos",
    "Slice": "Fatie",
    "Mince": "Pique fino",
    "Season": "Tempere",
    "Add": "Adicione",
    "Serve": "Sirva",
    "Garnish": "Decore",
    "Drain": "Escorra",
    "Rinse": "Enxágue",
    "Peel": "Descasque",
    "Wash": "Lave",
    "Cut": "Corte",
    "Remove": "Retire",
    "Place": "Coloque",
    "Put": "Ponha",
    "Pour": "Despeje",
    "Sprinkle": "Polvilhe",
    "Cover": "Cubra",
    "Uncover": "Descubra",
    "Let": "Deixe",
    "Allow": "Permita",
    "Cool": "Esfrie",
    "Chill": "Gele",
    "Marinate": "Marine",
    # Tempos e temperaturas
    "minutes": "minutos",
    "minute": "minuto",
    "mins": "min",
    "hours": "horas",
    "hour": "hora",
    "seconds": "segundos",
    "second": "segundo",
    "degrees": "graus",
    "hot": "quente",
    "warm": "morno",
    "cold": "frio",
    "medium heat": "fogo médio",
    "medium-heat": "fogo médio",
    "high heat": "fogo alto",
    "low heat": "fogo baixo",
    "until": "até",
    "about": "cerca de",
    "approximately": "aproximadamente",
    # Outras palavras comuns
    "and": "e",
    "or": "ou",
    "with": "com",
    "without": "sem",
    "into": "dentro",
    "onto": "sobre",
    "over": "sobre",
    "under": "sob",
    "from": "de",
    "taste": "gosto",
    "fresh": "fresco",
    "dried": "seco",
    "frozen": "congelado",
    "canned": "enlatado",
    "large": "grande",
    "small": "pequeno",
    "medium": "médio",
})

# Termos populares em português -> candidatos em inglês para buscar no catálogo
COLLOQUIAL_TERMS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "frango": ("chicken",),
    "peito de frango": ("chicken breast",),
    "galinha": ("chicken",),
    "carne": ("beef",),
    "carne moída": ("minced beef", "beef"),
    "bife": ("beef",),
    "porco": ("pork",),
    "linguiça": ("sausages",),
    "peixe": ("fish", "salmon"),
    "camarão": ("prawns", "shrimp"),
    "frutos do mar": ("seafood",),
    "batata": ("potatoes",),
    "ovo": ("egg", "eggs"),
    "ovos": ("eggs",),
    "arroz": ("rice",),
    "macarrão": ("pasta", "spaghetti"),
    "massa": ("pasta",),
    "feijão": ("beans",),
    "queijo": ("cheese",),
    "tomate": ("tomatoes",),
    "cebola": ("onion",),
    "alho": ("garlic",),
    "cogumelo": ("mushrooms",),
    "bolo": ("cake",),
    "torta": ("pie", "tart"),
    "doce": ("dessert",),
    "sobremesa": ("dessert",),
    "sopa": ("soup",),
    "salada": ("salad",),
    "café da manhã": ("breakfast",),
    "vegetariano": ("vegetarian",),
    "vegano": ("vegan",),
    "leite condensado": ("condensed milk",),
    "chocolate": ("chocolate",),
})
