from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, Text, text
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class Vehicle(Base):
    __tablename__ = "veicoli"
    id = Column(Integer, primary_key=True, autoincrement=True)
    sku = Column(Text, nullable=False, unique=True)
    titolo = Column(Text)
    marca = Column(Text)
    modello = Column(Text)
    versione = Column(Text)
    categoria = Column(Text)
    slug = Column(Text, index=True)
    immagine_url = Column(Text)
    alimentazione = Column(Text)  # Benzina|Diesel|Elettrica|Ibrida-Benzina|...
    cambio = Column(Text)

    # long term
    canone_mensile = Column(Numeric(10, 2))
    anticipo = Column(Numeric(10, 2))
    durata_mesi = Column(Integer, default=48)
    km_annui = Column(Integer, default=10000)

    # short term
    noleggio_breve = Column(Boolean, default=False)
    prezzo_giornaliero = Column(Numeric(10, 2))
    km_giornaliero = Column(Integer)
    prezzo_settimanale = Column(Numeric(10, 2))
    km_settimanale = Column(Integer)
    prezzo_mensile_breve = Column(Numeric(10, 2))
    km_mensile_breve = Column(Integer)
    cauzione_richiesta = Column(Numeric(10, 2))
    costo_per_km = Column(Numeric(10, 4))

    promo = Column(Boolean, default=False)
    tempo_consegna = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=text("CURRENT_TIMESTAMP"))
    updated_at = Column(DateTime(timezone=True))
