FIRST_NAMES = [
    "Aiko",
    "Ben",
    "Chiara",
    "Daichi",
    "Elena",
    "Farid",
    "Grace",
    "Haruto",
    "Ines",
    "Jonas",
    "Kaori",
    "Liam",
    "Mei",
    "Noah",
    "Olivia",
    "Pedro",
    "Quinn",
    "Rina",
    "Sota",
    "Tara",
    "Umar",
    "Vera",
    "Wen",
    "Xavier",
    "Yuki",
    "Zara",
    "Akira",
    "Bianca",
    "Chen",
    "Dana",
    "Emil",
    "Fumiko",
    "Gita",
    "Hana",
    "Ivan",
    "Jun",
    "Kenji",
    "Lena",
    "Mika",
    "Nora",
    "Oscar",
    "Priya",
    "Ren",
    "Sakura",
    "Tomas",
    "Ume",
    "Vik",
    "Willa",
]
